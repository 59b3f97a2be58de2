"""
Setup script for the Certificate Transparency enforcement policy tool.
"""

from setuptools import setup

setup(
    name="ct_policy",
    version="0.1.0",
    description="Certificate Transparency enforcement policy resolver",
    author="Vipin",
    author_email="vipin@example.com",
    packages=[
        "ctpolicy",
        "ctpolicy.cli",
        "ctpolicy.policy",
        "ctpolicy.stores",
        "ctpolicy.utils",
    ],
    include_package_data=True,
    install_requires=[
        "click>=8.0.0",
        "rich>=10.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "ctpolicy=ctpolicy.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 3 - Alpha",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "Topic :: Security",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
    ],
    python_requires=">=3.11",
)
