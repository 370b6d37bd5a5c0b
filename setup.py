"""
Setup script for spaced-drill.

spaced-drill is the in-session reinforcement engine for flashcard study
rounds. It serves three roles:

1. Scheduling - decides where missed cards are reinserted in the queue
2. Mastery - tracks consecutive-correct mastery per card and deck
3. Session state - applies answer events and reports live metrics

The 'drill' command is a developer CLI for simulating rounds and
inspecting stored mastery.
"""

from setuptools import find_packages, setup

setup(
    name="spaced-drill",
    version="1.0.0",
    description="In-session spaced reinforcement and mastery tracking for flashcard rounds",
    long_description=open("README.md", encoding="utf-8").read() if __import__("os").path.exists("README.md") else "",
    long_description_content_type="text/markdown",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.11",
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
            "drill=src.cli.main:run",
        ],
    },
    classifiers=[
        "Development Status :: 4 - Beta",
        "Environment :: Console",
        "Intended Audience :: Developers",
        "Intended Audience :: Education",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning spaced-repetition flashcards mastery scheduling",
)
