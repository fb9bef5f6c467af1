"""Setup configuration for the art-cluster package."""

import os
from setuptools import setup, find_packages

# Read the README for PyPI
long_description = ""
if os.path.exists("README.md"):
    with open("README.md", "r", encoding="utf-8") as fh:
        long_description = fh.read()

# Read version from package
version_file = os.path.join(os.path.dirname(__file__), "artcluster", "__init__.py")
with open(version_file) as f:
    for line in f:
        if line.startswith("__version__"):
            version = line.split("=")[1].strip().strip('"').strip("'")
            break
    else:
        version = "0.1.0"

setup(
    name="art-cluster",
    version=version,
    description="Incremental Adaptive Resonance Theory clustering engines",
    long_description=long_description,
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Science/Research",
        "Topic :: Scientific/Engineering :: Artificial Intelligence",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.9",
    install_requires=[
        "pyyaml>=6.0",
        "click>=8.0",
        "rich>=13.0",
        "numpy>=1.21.0",
        "scipy>=1.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "coverage>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "artcluster=artcluster.cli:main",
        ],
    },
    keywords=[
        "clustering",
        "adaptive-resonance-theory",
        "fuzzy-art",
        "online-learning",
    ],
)
