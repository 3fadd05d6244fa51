# -*- coding: utf-8 -*-
from .routes import router

__all__ = ["router"]
