
from setuptools import setup, find_packages
setup(
    name="visitedlink",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*"]),
    install_requires=["numpy", "zstandard"],
    extras_require={"test": ["pytest"]},
    entry_points={
        "console_scripts": [
            "visitedlink=visitedlink.cli:main",
            "visitedlink-link=visitedlink.cli:link_main",
            "visitedlink-create=visitedlink.cli:create_main",
            "visitedlink-stats=visitedlink.cli:stats_main",
        ],
    },
    python_requires=">=3.9",
)
