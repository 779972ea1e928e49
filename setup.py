"""Setup configuration for rerc_sla"""

from setuptools import setup, find_packages

setup(
    name="rerc-sla-toolkit",
    version="0.1.0",
    description=(
        "Working-day SLA compliance and academic-year reporting for research "
        "ethics committee protocol submissions."
    ),
    author="RERC SLA Toolkit Contributors",
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
            "rerc-sla=rerc_sla.main:main",
        ],
    },
)
