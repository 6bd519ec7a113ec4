from setuptools import setup, find_namespace_packages

setup(
    name="dlt_ai",
    version="1.0.0",
    description="Super Lotto 5+2 multi-strategy number generator with per-group scoring",
    packages=find_namespace_packages(include=["dlt_ai", "dlt_ai.*"]),
    python_requires=">=3.8",
    install_requires=[
        'numpy>=1.24.0',
        'pandas>=2.0.0',
        'scipy>=1.11.0',
        'sqlalchemy>=2.0.0',
        'streamlit>=1.28.0',
        'python-dateutil>=2.8.2',
    ],
    extras_require={
        'test': ['pytest>=7.0'],
    }
)
