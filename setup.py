from setuptools import setup, find_packages

setup(
    name="portfolio",
    version="1.0.0",
    packages=find_packages(include=["portfolio", "portfolio.*"]),
    python_requires=">=3.9",
    install_requires=[
        "fastapi",
        "uvicorn",
        "python-multipart",
        "pydantic>=2",
        "email-validator",
        "google-cloud-storage",
        "sqlalchemy>=2",
        "python-dotenv",
        "python-slugify",
        "PyJWT",
        "jinja2",
        "werkzeug",
    ],
    extras_require={
        "dev": [
            "pytest",
            "httpx",
            "black",
            "isort",
            "mypy",
        ],
        "test": [
            "pytest",
            "httpx",
        ],
    },
    author="",
    author_email="",
    description="Personal portfolio builder with a setup wizard and resume export",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    keywords="portfolio, resume, fastapi",
    classifiers=[
        "Development Status :: 4 - Beta",
        "Intended Audience :: End Users/Desktop",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.12",
    ],
)
