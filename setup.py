#!/usr/bin/python
# -*- encoding: utf-8 -*-
import ast
import re

from setuptools import find_packages
from setuptools import setup

## The version number is kept in carddav/__init__.py only, and picked
## up from there.  Same trick as the icalendar library uses.
_version_re = re.compile(r"__version__\s+=\s+(.*)")
with open("carddav/__init__.py", "rb") as f:
    version = str(
        ast.literal_eval(_version_re.search(f.read().decode("utf-8")).group(1))
    )

if __name__ == "__main__":
    test_packages = [
        "pytest",
        "pytest-asyncio",
        "pytest-coverage",
        "coverage",
        "multidict",
    ]

    setup(
        name="carddav",
        version=version,
        description="Async CardDAV (RFC6352) client core for contact synchronization",
        long_description=open("README.md").read(),
        long_description_content_type="text/markdown",
        classifiers=[
            "Development Status :: 4 - Beta",
            "Intended Audience :: Developers",
            "License :: OSI Approved :: Apache Software License",
            "Operating System :: OS Independent",
            "Programming Language :: Python",
            "Programming Language :: Python :: 3",
            "Framework :: AsyncIO",
            "Topic :: Communications :: Email :: Address Book",
            "Topic :: Software Development :: Libraries " ":: Python Modules",
        ],
        keywords="carddav webdav vcard contacts sync",
        license="Apache-2.0",
        python_requires=">=3.10",
        packages=find_packages(exclude=["tests", "tests.*"]),
        include_package_data=True,
        zip_safe=False,
        install_requires=[
            "lxml",
            "aiohttp",
        ],
        extras_require={
            "test": test_packages,
            "yaml": ["pyyaml"],
        },
    )
