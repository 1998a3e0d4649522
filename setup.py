# setup.py
from setuptools import setup, find_namespace_packages

setup(
    name="codebase-md",
    version="0.1.0",
    description="Convierte un árbol de directorios en un único documento con estructura y contenido",
    author="Enrique Paredes",
    author_email="eparedesbalen@gmail.com",
    package_dir={"": "src"},
    packages=find_namespace_packages(where="src", include=["codebase_md*"]),
    python_requires=">=3.9",
    install_requires=[
        "pathspec>=0.10,<1",  # Reglas .gitignore / .ignore / exclude
        "tiktoken",  # Estimación de tokens del documento generado
    ],
    extras_require={
        "test": ["pytest"],
    },
    entry_points={
        'console_scripts': [
            'codebase-md=codebase_md.main:main',
        ],
    },
    classifiers=[
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
)
