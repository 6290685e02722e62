"""
Page Objects Package
====================
Browser façade and page wrappers used by E2E test cases.
"""

from .app_page import AppPage
from .browser import Browser
from .dev_server_login_page import DevServerLoginPage
from .home_page import HomePage

__all__ = ['AppPage', 'Browser', 'DevServerLoginPage', 'HomePage']
