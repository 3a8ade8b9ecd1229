from pathlib import Path

from setuptools import find_packages, setup


with Path("requirements.txt").open() as requirements_file:
    install_requires = [line.strip() for line in requirements_file if line.strip() and not line.startswith("#")]

setup(
    name="timesheet_grid",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    include_package_data=True,
    install_requires=install_requires,
    extras_require={"test": ["pytest"]},
    python_requires=">=3.11",
    entry_points={"console_scripts": ["timesheet-grid=timesheet_grid.main:main"]},
)
