from setuptools import setup, find_packages

setup(
    name="cgsim",
    version="0.1.0",
    packages=find_packages(where="src"),
    package_dir={"": "src"},
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "pandas",
        "networkx",
        "pyyaml",
        "mlflow",
    ],
    extras_require={
        "test": ["pytest", "scipy"],
    },
    entry_points={
        "console_scripts": [
            "cgsim-generate=cgsim.data_generator.main:main",
        ],
    },
)
