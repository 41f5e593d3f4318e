from setuptools import setup, find_namespace_packages

setup(
    name="aptos-move-scripts",
    version="0.1.0",
    description="Build, test and ABI export scripts for Aptos Move packages",
    packages=find_namespace_packages(include=["aptos_move_scripts", "aptos_move_scripts.*"]),
    install_requires=[
        "aiohttp>=3.8.0",
        "python-dotenv>=1.0.0",
    ],
    extras_require={
        "test": [
            "pytest>=7.0.0",
            "pytest-asyncio>=0.21.0",
        ],
    },
    python_requires=">=3.8",
    entry_points={
        "console_scripts": [
            "aptos-move=aptos_move_scripts.main:main",
            "move-get-abi=aptos_move_scripts.main:move_get_abi_main",
            "move-compile=aptos_move_scripts.main:move_compile_main",
            "move-test=aptos_move_scripts.main:move_test_main",
        ],
    },
)
