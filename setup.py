# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="ream",
    version="0.1.0",
    description="Lexer, parser, tree-walking evaluator and bytecode VM for the Ream language",
    packages=find_namespace_packages(include=["ream", "ream.*"]),
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
