ERRORS = {
  # Conversion failures
  "E_OPEN_INPUT": "Could not open input file",
  "E_OPEN_OUTPUT": "Could not open output file",
  "E_READ": "Could not read input file",
  "E_WRITE": "Could not write to output file",
  "E_LAYOUT": "Value does not fit its record field",
  # Verification failures
  "E_TRUNCATED": "File shorter than the smallest valid image",
  "E_MAGIC": "Header magic is not 7F 49 41 52",
  "E_RESERVED": "Reserved byte has an unexpected value",
  "E_RECORD_TYPE": "First record is not a data record",
  "E_SIZE_MISMATCH": "Header size does not match data record size",
  "E_LENGTH": "File length does not match declared payload size",
  "E_END_MARKER": "End record marker missing after payload",
  "E_CHECKSUM": "Stored checksum does not match file contents",
}
