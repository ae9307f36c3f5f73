"""Setup configuration for HashMaker - Folder Hash Generation and Comparison Tool."""

from setuptools import setup, find_packages
import os
import re

# Read requirements from requirements.txt
def read_requirements():
    """
    Load dependency specifications from requirements.txt next to this module.

    Returns:
        list[str]: Requirement strings, excluding empty lines and comments.
    """
    requirements_path = os.path.join(os.path.dirname(__file__), "requirements.txt")
    with open(requirements_path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]

# Read long description from README.md
def read_readme():
    """
    Load the project's long description from README.md, if present.

    Returns:
        str: Contents of README.md, or an empty string if the file does not exist.
    """
    readme_path = os.path.join(os.path.dirname(__file__), "README.md")
    if os.path.exists(readme_path):
        with open(readme_path, "r", encoding="utf-8") as f:
            return f.read()
    return ""


# Read version from hashmaker/cli.py (single source of truth)
def read_version():
    """
    Get the package version defined in hashmaker/cli.py.

    Raises:
        RuntimeError: If no __version__ assignment is found in hashmaker/cli.py.
    """
    cli_path = os.path.join(os.path.dirname(__file__), "hashmaker", "cli.py")
    with open(cli_path, "r", encoding="utf-8") as f:
        content = f.read()
    match = re.search(r'^__version__\s*=\s*["\']([^"\']+)["\']', content, re.MULTILINE)
    if match:
        return match.group(1)
    raise RuntimeError("Unable to find __version__ in hashmaker/cli.py")


setup(
    name="hashmaker",
    version=read_version(),
    description="Folder hash generation, hash report rendering and comparison tool",
    long_description=read_readme(),
    long_description_content_type="text/markdown",
    author="HashMaker Team",
    license="MIT",
    python_requires=">=3.9",
    install_requires=read_requirements(),
    extras_require={
        "test": ["pytest>=7.0"],
    },
    packages=find_packages(exclude=["tests", "tests.*"]),
    entry_points={
        "console_scripts": [
            "hashmaker=hashmaker.cli:app",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: End Users/Desktop",
        "Intended Audience :: System Administrators",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Security :: Cryptography",
        "Topic :: Utilities",
    ],
    keywords="hash checksum folder integrity report comparison",
)
