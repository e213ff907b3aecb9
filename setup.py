"""
PageLens - Setup Configuration

Page content extraction, change detection and bounded interaction for
AI assistants that read and act on web pages.

License: Apache-2.0
"""

from setuptools import setup, find_packages
from pathlib import Path

# Read README for long description
readme_file = Path(__file__).parent / "README.md"
long_description = readme_file.read_text(encoding="utf-8") if readme_file.exists() else ""

# Core dependencies
core_deps = [
    # Models
    "pydantic>=2.11.9",
    # Browser automation
    "playwright>=1.55.0",
    "beautifulsoup4>=4.14.2",
    "soupsieve>=2.6",  # CSS selector matching/escaping for references
    # Configuration files
    "pyyaml>=6.0.2",
    # CLI
    "click>=8.1.7",
]

# Test dependencies
test_deps = [
    "pytest>=8.4.1",
    "pytest-asyncio>=1.0.0",
    "pytest-mock>=3.14.1",
    "pytest-cov>=6.2.1",
]

# Development dependencies
dev_deps = test_deps + [
    # Code quality
    "black>=25.0.0",
    "flake8>=7.1.0",
    "mypy>=1.13.0",
]

setup(
    name="pagelens",
    version="0.1.0",

    # Package description
    description="Page content extraction, change detection and bounded interaction for AI assistants",
    long_description=long_description,
    long_description_content_type="text/markdown",

    # Package discovery
    packages=find_packages(where="src"),
    package_dir={"": "src"},

    # Python version requirement
    python_requires=">=3.11",

    # Dependencies
    install_requires=core_deps,

    # Optional dependencies (extras)
    extras_require={
        "test": test_deps,
        "dev": dev_deps,
    },

    # PyPI classifiers
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: Apache Software License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
        "Programming Language :: Python :: 3.13",
        "Programming Language :: Python :: 3 :: Only",
        "Topic :: Internet :: WWW/HTTP :: Browsers",
        "Topic :: Software Development :: Libraries :: Python Modules",
        "Framework :: AsyncIO",
    ],

    keywords=[
        "ai", "assistant", "browser", "playwright", "content-extraction",
        "web-automation", "llm",
    ],

    license="Apache-2.0",

    include_package_data=True,
    zip_safe=False,

    entry_points={
        "console_scripts": [
            "pagelens=pagelens.cli:main",
        ],
    },
)
