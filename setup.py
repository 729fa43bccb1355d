from setuptools import setup, find_namespace_packages
import os

here = os.path.abspath(os.path.dirname(__file__))
README = open(os.path.join(here, 'README.md')).read()
NEWS = open(os.path.join(here, 'NEWS.txt')).read()


version = '0.0.1'

install_requires = [
    'amaranth>=0.5',
]

softfloat_requires = [
    'sfpy',  # optional: needs a toolchain to build SoftFloat on new pythons
]

test_requires = [
    'pytest',
]

setup(
    name='libresoc-fporacle',
    version=version,
    description="Differential-testing oracle for IEEE754 FP32 "
                "divide/sqrt hardware units",
    long_description=README + '\n\n' + NEWS,
    long_description_content_type='text/markdown',
    classifiers=[
        "Topic :: Software Development :: Testing",
        "License :: OSI Approved :: GNU Lesser General Public License v2 or later (LGPLv2+)",
        "Programming Language :: Python :: 3",
    ],
    keywords='amaranth nmigen ieee754 softfloat verification',
    license='LGPL-2.1-or-later',
    packages=find_namespace_packages('src', include=['fporacle*']),
    package_dir = {'': 'src'},
    include_package_data=True,
    zip_safe=False,
    python_requires='>=3.9',
    install_requires=install_requires,
    extras_require={
        'softfloat': softfloat_requires,
        'test': test_requires,
    },
    entry_points={
        'console_scripts': [
            'fpdiv-oracle = fporacle.cli:div_main',
            'fpsqrt-oracle = fporacle.cli:sqrt_main',
        ],
    },
)
