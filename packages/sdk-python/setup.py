"""Setup for Ephemeral Chain Python SDK."""

from setuptools import find_packages, setup

setup(
    name="ephemeral-chain-sdk",
    version="0.1.0",
    description="Ephemeral Chain API Python SDK",
    packages=find_packages(exclude=["tests"]),
    install_requires=[
        "requests>=2.31.0",
    ],
    python_requires=">=3.11",
)
