# setup.py
import re

import os
from setuptools import find_packages
from setuptools import setup


def get_version_from_init():
    """Reads the __version__ string from tmcl_modules/__init__.py."""
    init_py_path = os.path.join(
        os.path.dirname(os.path.abspath(__file__)), "tmcl_modules", "__init__.py"
    )
    try:
        with open(init_py_path, "r", encoding="utf-8") as f:
            version_file_content = f.read()
        version_match = re.search(
            r"^__version__\s*=\s*['\"]([^'\"]*)['\"]",
            version_file_content,
            re.M,
        )
        if version_match:
            return version_match.group(1)
        raise RuntimeError(
            f"Unable to find __version__ string in {init_py_path}."
        )
    except FileNotFoundError:
        raise RuntimeError(
            f"{init_py_path} not found. Ensure you are in the correct directory."
        )


try:
    with open("README.md", "r", encoding="utf-8") as f:
        long_description = f.read()
except FileNotFoundError:
    long_description = (
        "Python library for the TMCL binary protocol of Trinamic TMCM stepper motor modules."
    )


setup(
    name="tmcl-modules",
    version=get_version_from_init(),
    description="Python library for the TMCL binary protocol of Trinamic TMCM stepper motor modules.",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(include=["tmcl_modules", "tmcl_modules.*"]),
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: Science/Research",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Topic :: System :: Hardware :: Hardware Drivers",
    ],
    python_requires=">=3.8",
    install_requires=[
        "python-can>=4.0.0,<5.0.0",
        "pyserial>=3.4",
    ],
    extras_require={
        "test": [
            "pytest>=6.0",
        ],
        "dev": [
            "pytest>=6.0",
            "flake8>=3.9",
            "black>=21.0",
            "mypy>=0.900",
        ],
    },
    keywords="tmcl tmcm trinamic stepper motor canbus rs485 serial robotics automation",
)
