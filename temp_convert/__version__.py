__title__ = 'temp_convert'
__description__ = 'Fahrenheit / Celsius temperature conversion form'
__url__ = 'https://github.com/dskrypa/temp_convert'
__version__ = '2024.03.16'
__author__ = 'Doug Skrypa'
__author_email__ = 'dskrypa@gmail.com'
