from palu.dense.enums import Layout


def to_2d_array(A_ptr, rows_A, cols_A, lda, layout):
    # Returns a view whenever A_ptr is a contiguous 1-D ndarray.
    if layout == Layout.ColMajor:
        A = A_ptr[:lda * cols_A].reshape((lda, cols_A), order='F')
        A = A[:rows_A, :]
    else:
        A = A_ptr[:lda * rows_A].reshape((rows_A, lda), order='C')
        A = A[:, :cols_A]
    return A


def required_size(rows_A, cols_A, lda, layout):
    # Matches the slicing in to_2d_array.
    if layout == Layout.ColMajor:
        return lda * cols_A
    else:
        return lda * rows_A


def write_back(B, B_ptr, n, d, ldb, layout):
    # Write B (d-by-n) into the flat buffer B_ptr. Only needed when B
    # doesn't share memory with B_ptr.
    if layout == Layout.ColMajor:
        for col in range(n):
            start = ldb * col
            stop = start + d
            B_ptr[start:stop] = B[:, col]
    else:
        for row in range(d):
            start = ldb * row
            stop = start + n
            B_ptr[start:stop] = B[row, :]
    pass
