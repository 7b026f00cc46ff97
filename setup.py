"""
Setup script for adaptive-gating.

Adaptive gating lets learners skip course content they have already
mastered. A diagnostic assessment's per-question results decide which
'related learning' sections can be hidden, made optional or marked
complete, and the decision is kept in offline storage so it survives a
resumed session.

The 'adaptive-gating' command replays recorded diagnostic attempts
against a course definition and inspects stored learner state.
"""

from setuptools import find_packages, setup

setup(
    name="adaptive-gating",
    version="1.0.0",
    description="Diagnostic-driven adaptive content gating for e-learning courses",
    long_description=__doc__,
    long_description_content_type="text/plain",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["config"],
    python_requires=">=3.10",
    install_requires=[
        # CLI
        "typer>=0.9.0",
        "rich>=13.0.0",
        # Offline storage
        "sqlalchemy>=2.0.0",
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
            "adaptive-gating=src.cli.adaptive_cli:main",
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
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
        "Topic :: Education",
        "Topic :: Education :: Computer Aided Instruction (CAI)",
    ],
    keywords="learning adaptive diagnostic assessment gating education",
)
