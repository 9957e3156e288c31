"""Setup configuration for pally package."""

from setuptools import setup, find_packages

setup(
    name="pally",
    version="0.1.0",
    description="Automated accessibility testing of web pages with Playwright",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={"pally": ["vendor/*.js"]},
    python_requires=">=3.8",
    install_requires=[
        "playwright>=1.40.0",
        "pydantic>=2.0.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "dev": [
            "pytest>=7.4.0",
            "pytest-asyncio>=0.21.0",
            "pytest-cov>=4.1.0",
            "pytest-mock>=3.11.0",
            "ruff>=0.1.0",
            "mypy>=1.5.0",
            "black>=23.0.0",
        ],
    },
)
