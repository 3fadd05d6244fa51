# -*- coding: utf-8 -*-
"""Admin front end of the CBT exam platform."""

__version__ = "0.1.0"
