# setup.py
from setuptools import setup, find_packages

setup(
    name="db_navigator",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    install_requires=[
        "sqlalchemy",
        "pymysql",
        "pydantic",
        "fastapi",
        "uvicorn",
        "httpx",
        "python-dotenv",
        "keyring",
        "pyyaml",
    ],
    extras_require={
        "test": [
            "pytest",
        ],
    },
)
