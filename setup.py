"""setuptools setup for StepsTimer.

Install for development:
    pip install -e .[test]
"""

from setuptools import setup

setup(
    name="stepstimer",
    version="0.1.0",
    description="Session timer with named, overlapping steps",
    packages=["stepstimer", "stepstimer.timer", "stepstimer.ui"],
    python_requires=">=3.10",
    install_requires=["PyQt6"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "gui_scripts": ["stepstimer = stepstimer.__main__:main"],
    },
)
