from setuptools import setup, find_packages

setup(
    name="aigraph",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages("src", exclude=["tests", "tests.*"]),
    install_requires=[
        "pydantic>=2.0",
        "mirascope>=1.0,<2",
        "tenacity>=8.0",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
        ],
        "openai": [
            "mirascope[openai]>=1.0,<2",
        ],
    },
    python_requires=">=3.10",
    description="lightweight async graph workflows for chaining LLM processing steps",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
)
