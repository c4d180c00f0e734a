"""
Modules package initialization.
This package contains all the functional modules of the application.
"""

from geopost.modules import user_management
from geopost.modules import friendships
from geopost.modules import groups
from geopost.modules import visibility
from geopost.modules import posts
from geopost.modules import locations
from geopost.modules import tags
