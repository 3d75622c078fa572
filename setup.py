from setuptools import setup, find_packages
setup(
    name="miacasa_site",
    version="0.1.0",
    package_dir={"": "src"},
    packages=find_packages(where="src"),
    include_package_data=True,
    package_data={"miacasa_site": ["templates/*.html"]},
    python_requires=">=3.10",
    install_requires=[
        "fastapi",
        "pydantic>=2",
        "jinja2",
        "uvicorn",
        "python-multipart",
    ],
    extras_require={
        "test": ["pytest", "httpx"],
    },
    entry_points={
        'console_scripts': [
            'miacasa_site=miacasa_site.__main__:main'
        ]
    }
)
