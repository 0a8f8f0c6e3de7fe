"""
Setup configuration for the XML to CSV extraction system.
Use this for:
- Creating a Distributable Package
- Installing the xml_to_csv console command

If you're just setting up another development environment, consider using `pip install -e .[dev]` instead.

For Distributable Package:
- python setup.py sdist bdist_wheel
    (Creates installable .whl files in dist/ folder)
"""

from setuptools import setup, find_packages
from pathlib import Path

with open("requirements.txt", "r", encoding="utf-8") as fh:
    requirements = [line.strip() for line in fh if line.strip() and not line.startswith("#")]

# Separate main requirements from development requirements
main_requirements = []
dev_requirements = []

for req in requirements:
    if any(dev_pkg in req for dev_pkg in ["pytest", "black", "flake8", "mypy"]):
        dev_requirements.append(req)
    else:
        main_requirements.append(req)

setup(
    name="xml_to_csv",
    version="1.0.0",
    author="XML to CSV Team",
    description="Parallel extraction of goods records from customs declaration XML into a delimited file.",
    long_description=Path("README.md").read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3.9",
        "Topic :: Text Processing :: Markup :: XML",
    ],
    python_requires=">=3.9",
    install_requires=main_requirements,
    extras_require={
        "dev": dev_requirements,
    },
    entry_points={
        "console_scripts": [
            "xml_to_csv=xml_to_csv.cli:main",
        ],
    },
)
