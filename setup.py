#!/usr/bin/env python3

from setuptools import setup, find_packages

setup(
    name="tko-subs",
    version="1.0.0",
    description="tko-subs - Detect dangling CNAME subdomains and take them over",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["tko_subs", "config_manager"],
    include_package_data=True,
    install_requires=[
        "rich>=10.0.0",
        "dnspython>=2.4.2",
        "requests>=2.31.0",
        "urllib3>=1.26.0",
        "pyyaml>=6.0.1",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        'console_scripts': [
            'tko-subs=tko_subs:main',
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Information Technology",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Topic :: Security",
        "Topic :: System :: Networking",
    ],
    python_requires=">=3.8",
)
