from setuptools import setup, find_packages
import os

here = os.path.abspath(os.path.dirname(__file__))
README = open(os.path.join(here, 'README.md')).read()

version = '0.0.1'

# libxed itself is not on PyPI.  the cffi binding is compiled the first
# time an instruction is encoded, against the XED headers and library
# found via XED_INCLUDE_DIR / XED_LIBRARY_DIR (or the compiler defaults).

install_requires = [
    'cffi', # LuaJIT-style C FFI for Python
]

test_requires = [
    'pytest',
]

setup(
    name='x86asmtest',
    version=version,
    description="x86-64 Go assembler encoding tests checked against Intel XED",
    long_description=README + '\n\n',
    long_description_content_type='text/markdown',
    classifiers=[
        "Topic :: Software Development :: Assemblers",
        "Topic :: Software Development :: Testing",
        "License :: OSI Approved :: GNU Lesser General Public License v3 or later (LGPLv3+)",
        "Programming Language :: Python :: 3",
        "Operating System :: OS Independent",
    ],
    keywords='x86 avx512 xed assembler differential-testing',
    license='LGPLv3+',
    python_requires='>=3.7',
    packages=find_packages('src'),
    package_dir={'': 'src'},
    include_package_data=True,
    zip_safe=False,
    install_requires=install_requires,
    extras_require={
        'test': test_requires,
    },
    entry_points={
        'console_scripts': [
            'x86asmtest=x86asmtest.gen.main:main',
        ]
    }
)
