"""
Setup configuration for ctalocator package.
"""

from setuptools import setup, find_packages

setup(
    name="ctalocator",
    version="1.0.0",
    description="Primary call-to-action scoring and text-to-element matching for landing pages",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.9",
    install_requires=[
        "pydantic>=2.0",
        "numpy",
        "python-dotenv",
        "pyyaml",
    ],
    extras_require={
        "test": ["pytest"],
    },
)
