"""
Attach OpenAPI documentation to the routes of a web application

Copyright 2022-2025, Levente Hunyadi
"""

from setuptools import setup

if __name__ == "__main__":
    setup()
