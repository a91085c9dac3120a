# setup.py
from setuptools import setup, find_packages

setup(
    name="rownum",
    version="0.1.0",
    description="Dense, gapless row numbering for sharded parallel pipelines.",
    package_dir={"": "src"},
    packages=find_packages("src"),
    python_requires=">=3.9",
    install_requires=[
        "numpy",
        "tqdm",
        "setproctitle",
    ],
    extras_require={
        "test": ["pytest", "hypothesis"],
    },
)
