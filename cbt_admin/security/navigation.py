# -*- coding: utf-8 -*-
"""
Sidebar menu by role.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field

from cbt_admin.domain.enums import Role
from cbt_admin.domain.models import Me


class NavChild(BaseModel):
    title: str
    url: str


class NavItem(BaseModel):
    title: str
    url: str
    icon: str
    children: Optional[List[NavChild]] = None


class MenuBundle(BaseModel):
    nav_main: List[NavItem] = Field(default_factory=list)
    nav_secondary: List[NavItem] = Field(default_factory=list)


_SETTINGS = NavItem(title="Settings", url="/setting", icon="settings")

NAV_BY_ROLE: Dict[Role, MenuBundle] = {
    Role.SUPERADMIN: MenuBundle(
        nav_main=[
            NavItem(title="Dashboard", url="/cms/dashboard", icon="layout-dashboard"),
            NavItem(title="Data Mahasiswa", url="/cms/mahasiswa", icon="brand-databricks"),
            NavItem(title="LMS", url="/cms/lms", icon="folder-question"),
            NavItem(title="Ujian Online", url="/cms/tryout", icon="zoom-question"),
            NavItem(
                title="Bank Soal",
                url="/category-questions",
                icon="book",
                children=[
                    NavChild(title="Kategori Soal", url="/cms/category-questions"),
                    NavChild(title="Soal", url="/cms/questions"),
                ],
            ),
            NavItem(
                title="Konfigurasi",
                url="#",
                icon="zoom-question",
                children=[
                    NavChild(title="Prodi", url="/cms/prodi"),
                    NavChild(title="Jurusan", url="/cms/jurusan"),
                    NavChild(title="Kelas", url="/cms/class"),
                    NavChild(title="Mata Kuliah", url="/cms/mata-kuliah"),
                ],
            ),
            NavItem(
                title="Manajemen User",
                url="#",
                icon="user-cog",
                children=[
                    NavChild(title="Users", url="/cms/users"),
                    NavChild(title="Roles", url="/cms/roles"),
                ],
            ),
        ],
        nav_secondary=[_SETTINGS],
    ),
    # Supervisors only get the dashboard and the exam list
    Role.PENGAWAS: MenuBundle(
        nav_main=[
            NavItem(title="Dashboard", url="/dashboard", icon="dashboard"),
            NavItem(title="Ujian Online", url="/cms/tryout", icon="zoom-question"),
        ],
        nav_secondary=[_SETTINGS],
    ),
}


def menu_role(me: Me | None) -> Role:
    """Role of the first role entry; anything unknown gets the supervisor menu."""
    if me is not None and me.roles and me.roles[0].name == Role.SUPERADMIN.value:
        return Role.SUPERADMIN
    return Role.PENGAWAS


def menu_for(me: Me | None) -> MenuBundle:
    return NAV_BY_ROLE[menu_role(me)].model_copy(deep=True)
