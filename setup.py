#!/usr/bin/env python3
"""
Setup script for the ws-loadtest game-server load generator
"""

from setuptools import setup, find_packages

setup(
    name="ws-loadtest",
    version="0.0.1",
    description="Concurrent WebSocket bot clients that stream game inputs at ~30 Hz",
    packages=find_packages(include=["loadtest", "loadtest.*", "shared", "shared.*"]),
    install_requires=[
        "websockets==15.0",
        "click==8.1.7",
        "typer==0.12.3",
        "rich==13.9.2",
    ],
    extras_require={
        "test": [
            "pytest==8.4.2",
            "pytest-asyncio==1.2.0",
        ],
    },
    python_requires=">=3.9",
    entry_points={
        'console_scripts': [
            'ws-loadtest=loadtest.cli:main',
        ],
    },
)
