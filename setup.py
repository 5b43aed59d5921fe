from setuptools import setup, find_packages

setup(
    name="dx-finder",
    version="0.1.0",
    description="Watch for the closest maimai DX cabinet and post changes to a webhook",
    package_dir={"": "backend"},
    packages=find_packages(where="backend"),
    python_requires=">=3.9",
    install_requires=[
        "httpx>=0.23",
        "python-dateutil>=2.8",
        "python-dotenv>=1.0",
        "geopy>=2.4",
        "beautifulsoup4>=4.12",
    ],
    extras_require={
        "test": [
            "pytest>=7.0",
            "pytest-asyncio>=0.21",
            "pytest-httpx>=0.23",
        ],
        "lint": [
            "black>=23.0",
            "flake8>=6.0",
        ],
    },
    entry_points={
        "console_scripts": [
            "dx-finder=dxfinder.main:main",
        ],
    },
)
