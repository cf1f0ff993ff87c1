# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="covtree",
    version="1.0.0",
    description="Coverage tree browser: per-file test coverage rolled up into a directory tree",
    python_requires=">=3.8",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["covtree", "covtree.*"]),
    package_data={"covtree": ["interface/locales/*.json"]},
    include_package_data=True,
    install_requires=[
        "requests",
        "customtkinter",
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'covtree=covtree.interface.cli.app:main',
        ],
        'gui_scripts': [
            'covtree-gui=covtree.interface.gui.app:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
