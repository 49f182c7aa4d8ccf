"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

__version__ = "0.1.0"
__author__ = "Levente Hunyadi"
__copyright__ = "Copyright 2022-2025, Levente Hunyadi"
__license__ = "MIT"
__maintainer__ = "Levente Hunyadi"
__status__ = "Production"
