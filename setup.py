#!/usr/bin/env python3

from setuptools import setup, find_packages
import os


# Read version from __init__.py (single source of truth)
def get_version():
    here = os.path.abspath(os.path.dirname(__file__))
    version_file = os.path.join(here, "tvgrab", "__init__.py")

    with open(version_file, encoding="utf-8") as f:
        for line in f:
            if line.startswith("__version__"):
                # Extract version from line like: __version__ = "1.0.0"
                return line.split('"')[1]

    raise RuntimeError("Unable to find version string in __init__.py")


# Read long description from README
def read_long_description():
    here = os.path.abspath(os.path.dirname(__file__))
    try:
        with open(os.path.join(here, "README.md"), encoding="utf-8") as f:
            return f.read()
    except FileNotFoundError:
        return "XMLTV grabbers for Czech and Swiss television listings - tvgrab"


setup(
    name="tvgrab",
    version=get_version(),
    description="XMLTV grabbers for Czech and Swiss television listings",
    long_description=read_long_description(),
    long_description_content_type="text/markdown",
    # License
    license="GPL-3.0",
    # Package discovery
    packages=find_packages(exclude=["tests", "tests.*"]),
    # Python version requirement
    python_requires=">=3.8",
    # Core dependencies (always installed)
    install_requires=[
        "requests>=2.25.0",
        "beautifulsoup4>=4.9.0",
        "lxml>=4.6.0",
        "pytz>=2021.1",
    ],
    # Optional dependencies (extras)
    extras_require={
        # Development
        "dev": [
            "pytest>=7.0",
            "flake8>=3.8",
            "black>=21.0",
        ],
        # Tests only
        "test": [
            "pytest>=7.0",
            "pytest-cov>=2.10",
        ],
    },
    # Entry points for grabbers and module execution
    entry_points={
        "console_scripts": [
            "tv_grab_cz=tvgrab.main:main_cz",
            "tv_grab_ch_search=tvgrab.main:main_ch_search",
            "tvgrab=tvgrab.__main__:main",
        ],
    },
    # Package data
    package_data={
        "tvgrab": [
            "share/*/channel_ids",
        ],
    },
    include_package_data=True,
    # PyPI classifiers
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: End Users/Desktop",
        "Topic :: Multimedia :: Video",
        "License :: OSI Approved :: GNU General Public License v3 (GPLv3)",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Environment :: Console",
    ],
    keywords="xmltv epg tv guide grabber czech switzerland tv.search.ch",
    zip_safe=False,
)
