from setuptools import setup, find_packages

setup(
    name="prompt-console",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    package_data={
        "prompt_console": ["resources/*.yaml", "resources/schemas/*.yaml"],
    },
    include_package_data=True,
    install_requires=[
        "fastapi>=0.110",
        "uvicorn>=0.27",
        "pydantic>=2.5",
        "structlog>=24.1",
        "PyYAML>=6.0",
        "python-dotenv>=1.0",
        "jsonschema>=4.20",
        "watchdog>=4.0",
        "rich>=13.7",
    ],
    extras_require={
        "test": [
            "pytest>=8.0",
            "httpx>=0.27",
        ],
    },
    entry_points={
        "console_scripts": [
            "prompt-console=prompt_console.core.cli:main",
        ],
    },
    author="Prompt Console Contributors",
    description="Text-command dispatch engine for administrative consoles.",
    long_description=open("README.md").read(),
    long_description_content_type="text/markdown",
    classifiers=[
        "Programming Language :: Python :: 3",
        "License :: OSI Approved :: MIT License",
        "Operating System :: OS Independent",
    ],
    python_requires=">=3.10",
)
