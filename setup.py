#!/usr/bin/env python
from setuptools import find_packages, setup

setup(
    name="pixelcomp",
    version="0.4.0",
    description="Raster compositing, blend modes and color models on numpy",
    python_requires=">=3.9",
    package_dir={"": "src"},
    packages=find_packages("src"),
    install_requires=[
        "numpy",
        "Pillow>=9.1",
        "attrs>=22.2.0",
    ],
    extras_require={
        "spatial": ["scipy"],
        "tests": ["pytest", "scipy"],
    },
)
