from setuptools import setup, find_packages

setup(
    name="pmpquiz-backend",
    version="0.1.0",
    packages=find_packages(exclude=["pmpquiz.tests", "pmpquiz.tests.*"]),
    package_data={"pmpquiz": ["data/*.json", "data/*.yaml"]},
    include_package_data=True,
    install_requires=[
        "fastapi>=0.110.0",
        "uvicorn>=0.23.0",
        "pydantic>=2.0.0",
        "pydantic-settings>=2.0.0",
        "sqlalchemy[asyncio]>=2.0.0",
        "aiosqlite>=0.19.0",
        "python-dotenv>=1.0.0",
        "PyYAML>=6.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.23.0",
            "httpx>=0.24.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "pmpquiz-server=pmpquiz.main:run",
        ],
    },
    python_requires=">=3.9",
)
