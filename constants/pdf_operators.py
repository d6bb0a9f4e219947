"""
PDF Operator Constants

Content stream operators written when generated paragraphs are placed onto a
page. Values are operator names as accepted by pikepdf.Operator.

Reference: PDF 32000-1:2008 specification, Appendix A
"""

# ==============================================================================
# Graphics State Operators (PDF spec 8.4.4)
# ==============================================================================
OP_SAVE_STATE = 'q'                  # Save graphics state
OP_RESTORE_STATE = 'Q'               # Restore graphics state
OP_CTM = 'cm'                        # Modify current transformation matrix

# ==============================================================================
# Text State Operators (PDF spec 9.3)
# ==============================================================================
OP_BEGIN_TEXT = 'BT'             # Begin text object
OP_END_TEXT = 'ET'               # End text object
OP_SET_FONT = 'Tf'               # Set text font and size
OP_SET_WORD_SPACING = 'Tw'       # Set word spacing

# ==============================================================================
# Text Positioning Operators (PDF spec 9.4.2)
# ==============================================================================
OP_SET_TEXT_MATRIX = 'Tm'         # Set text matrix and text line matrix

# ==============================================================================
# Text Showing Operators (PDF spec 9.4.3)
# ==============================================================================
OP_SHOW_TEXT = 'Tj'               # Show a text string
