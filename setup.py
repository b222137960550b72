# setup.py
from setuptools import setup, find_packages

setup(
    name="marketplace",          # Package name
    version="0.1",               # Version
    packages=find_packages(exclude=["test", "test.*"]),
    install_requires=[           # External dependencies
        "fastapi",
        "uvicorn",
        "python-multipart",      # Form/File uploads
        "pydantic>=2",
        "slowapi",
        "supabase>=2.18",        # httpx_client option
        "httpx",
        "asyncpg",
        "Pillow",
        "mcp>=1.2,<2",
    ],
    extras_require={
        "test": [
            "pytest",
            "pytest-asyncio",
            "polyfactory",
            "httpx",
            "limits",                # ships with slowapi; used directly in tests
        ],
    },
    entry_points={
        "console_scripts": [
            "marketplace-web=marketplace.main:run",
            "marketplace-inspector=marketplace.inspection.server:main",
        ],
    },
    python_requires=">=3.10",
)
