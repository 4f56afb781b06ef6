import re
from pathlib import Path

from setuptools import find_packages, setup

NAME = "simplebill"
SRC_DIR = Path("src")

VERSION = re.search(
    r'^__version__ = "([^"]+)"',
    (SRC_DIR / NAME / "__init__.py").read_text(encoding="utf-8"),
    re.MULTILINE,
).group(1)

README = Path("README.md")
LONG_DESCRIPTION = README.read_text(encoding="utf-8") if README.exists() else ""

INSTALL_REQUIRES = [
    "PyYAML>=6.0",
    "Jinja2>=3.1",
    "jsonschema>=4.18",
    "openpyxl>=3.1",
    "packaging>=23.0",
    "requests>=2.31",
]

setup(
    name=NAME,
    version=VERSION,
    description="Command line invoicing from YAML files, rendered to PDF with wkhtmltopdf.",
    long_description=LONG_DESCRIPTION,
    long_description_content_type="text/markdown",
    python_requires=">=3.10",
    package_dir={"": str(SRC_DIR)},
    packages=find_packages(str(SRC_DIR)),
    package_data={NAME: ["defaults/*.yml", "defaults/*.html"]},
    include_package_data=True,
    install_requires=INSTALL_REQUIRES,
    extras_require={"test": ["pytest>=7"]},
    entry_points={"console_scripts": ["simplebill=simplebill.cli:main"]},
)
