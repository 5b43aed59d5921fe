# backend/dxfinder/constants.py

"""
Global constants used across modules: the locator endpoints and a single
User-Agent string so the cabinet locator can tell who is polling it.
"""

USER_AGENT = "dx-finder/1.0 (+https://github.com/dx-finder/dx-finder)"

LOCATION_BASE_URL = "https://location.am-all.net/alm/location"
SHOP_BASE_URL = "https://location.am-all.net/alm/shop"
LOCATION_GM = "98"  # game code for maimai DX
LOCATION_LANG = "en"

KM_TO_MILES = 0.621371
