from enum import Enum


class Layout(Enum):
    ColMajor = 'C'
    RowMajor = 'R'
