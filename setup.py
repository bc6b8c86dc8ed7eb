"""Package setup for w3c_validate."""

from setuptools import setup, find_packages

setup(
    name="w3c-validate-html",
    version="1.0.0",
    description="Validate HTML files, strings and crawled websites with the Nu Html Checker (vnu.jar)",
    packages=find_packages(exclude=["tests", "tests.*"]),
    python_requires=">=3.10",
    install_requires=[
        "aiohttp>=3.9.0",
        "requests>=2.31.0",
        "beautifulsoup4>=4.12.0",
        "lxml>=5.0.0",
        "urllib3>=2.0.0",
    ],
    extras_require={
        "ui": [
            "tqdm>=4.66.0",
            "colorlog>=6.8.0",
        ],
        "test": [
            "pytest>=7.4.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "w3c-validate-html=w3c_validate.cli:main",
        ],
    },
)
