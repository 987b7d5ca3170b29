# setup.py
from setuptools import setup, find_packages

setup(
    name="clove",
    version="0.3.0",
    description="A small Clojure-flavoured Lisp: macro expander, evaluator and core library",
    packages=find_packages(include=["clove", "clove.*"]),
    package_data={"clove": ["prelude/*.clj"]},
    python_requires=">=3.10",
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
    zip_safe=False,
)
