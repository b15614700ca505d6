from setuptools import setup, find_packages

setup(
    name="job-copilot",
    version="1.0.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    py_modules=["version"],
    python_requires=">=3.11",
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "pydantic>=2.5",
        "pydantic-settings>=2.1",
        "email-validator>=2.0",
        "pymongo>=4.6",
        "python-dotenv>=1.0",
        "bcrypt>=4.1",
        "PyJWT>=2.8",
        "requests>=2.31",
        "typing-extensions>=4.7",
        "langchain-core>=0.2",
        "langchain-openai>=0.1",
        "langchain-anthropic>=0.1",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "pytest-mock>=3.12",
            "pytest-asyncio>=0.23",
            "httpx>=0.26",
            "mongomock>=4.1",
        ],
    },
)
