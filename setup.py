"""Setup configuration for prpinger"""

from setuptools import setup, find_packages

setup(
    name="prpinger",
    version="0.1.0",
    description=(
        "Status-line notifier that nudges a developer about one open GitHub "
        "pull request still waiting for its first team review."
    ),
    author="prpinger Contributors",
    author_email="",
    python_requires=">=3.10",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "requests>=2.28.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.0",
            "black>=22.0",
            "flake8>=4.0",
            "mypy>=0.950",
        ],
    },
    entry_points={
        "console_scripts": [
            "prpinger=prpinger.main:main",
        ],
    },
)
