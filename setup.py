from setuptools import setup

setup(
    name="dfa-animator",
    version="0.1.0",
    packages=["dfa_animator"],
    py_modules=["main"],
    python_requires=">=3.8",
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["dfa-animator=main:main"]},
)
