"""
Setup configuration for the tv-devops infrastructure CDK application.

This setup.py file configures the Python package that resolves the
deployment configuration, builds the resource graph and synthesizes the
CloudFormation stack for the Fargate service.
"""

import setuptools
from pathlib import Path

# Read the README file for the long description
this_directory = Path(__file__).parent
long_description = ""
readme_path = this_directory / "README.md"
if readme_path.exists():
    long_description = readme_path.read_text(encoding="utf-8")

# Read requirements from requirements.txt
requirements_path = this_directory / "requirements.txt"
install_requires = []
if requirements_path.exists():
    with open(requirements_path, "r", encoding="utf-8") as f:
        install_requires = [
            line.strip()
            for line in f.readlines()
            if line.strip() and not line.startswith("#")
        ]

setuptools.setup(
    name="tv-devops-infra",
    version="1.0.0",
    description="AWS CDK application for a Fargate service behind an Application Load Balancer",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Package information
    packages=setuptools.find_packages(exclude=["tests", "tests.*"]),
    py_modules=["app"],
    python_requires=">=3.9",
    install_requires=install_requires,

    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "black>=22.0.0",
            "flake8>=5.0.0",
            "mypy>=1.0.0",
        ],
    },

    # Entry points for CLI commands
    entry_points={
        "console_scripts": [
            "tv-devops-synth=app:main",
        ],
    },

    # Package classification
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "Intended Audience :: System Administrators",
        "Topic :: System :: Systems Administration",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Operating System :: OS Independent",
        "Framework :: AWS CDK",
    ],

    keywords=[
        "aws",
        "cdk",
        "infrastructure",
        "fargate",
        "ecs",
        "alb",
        "cloudformation",
    ],
    include_package_data=True,
    zip_safe=False,
)
