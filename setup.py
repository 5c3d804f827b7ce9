"""
Setup script for pianoquiz-cli.

Pianoquiz is a terminal piano quiz that adapts to the learner. It serves
two roles:

1. Practice Companion - Short note, chord and scale drills from the terminal
2. Learning Engine - Q-learning question selection that keeps each learner
   in their zone of productive difficulty

The 'pianoquiz' command is the entry point.
"""

from setuptools import find_namespace_packages, setup

setup(
    name="pianoquiz-cli",
    version="1.0.0",
    description="Adaptive terminal piano quiz driven by Q-learning",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_namespace_packages(include=["src", "src.*"]),
    py_modules=["config"],
    package_data={"src.quiz": ["resources/*.json"]},
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Config & Validation
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        # Logging
        "loguru>=0.7.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0.0",
            "pytest-cov>=4.0.0",
            "ruff>=0.1.0",
            "mypy>=1.0.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pianoquiz=src.cli.main:main",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Multimedia :: Sound/Audio",
    ],
    keywords="piano music-education quiz reinforcement-learning q-learning cli",
)
