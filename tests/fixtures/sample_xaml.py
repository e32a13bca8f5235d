"""Sample rich-text (XAML) note bodies for conversion tests."""

IMAGE_URL = "https://files.logoscdn.com/v1/files/42/content"

SAMPLE_HEADING = (
    '<Paragraph FontSize="24">'
    '<Run Text="Psalm 23" FontBold="True"/>'
    '</Paragraph>'
)

SAMPLE_INDENTED = (
    '<Paragraph Margin="36,0,0,0">'
    '<Run Text="text"/>'
    '</Paragraph>'
)

SAMPLE_NESTED_LIST = (
    '<List MarkerStyle="Disc">'
    '<ListItem>'
    '<Paragraph><Run Text="top"/></Paragraph>'
    '<List MarkerStyle="Decimal">'
    '<ListItem><Paragraph><Run Text="nested"/></Paragraph></ListItem>'
    '</List>'
    '</ListItem>'
    '</List>'
)

SAMPLE_CODE_BLOCK = (
    '<Paragraph FontFamily="Courier New"><Run Text="a"/></Paragraph>'
    '<Paragraph FontFamily="Courier New"><Run Text="b"/></Paragraph>'
)

SAMPLE_TABLE = (
    '<Table>'
    '<TableRowGroup>'
    '<TableRow>'
    '<TableCell><Paragraph><Run Text="Book"/></Paragraph></TableCell>'
    '<TableCell><Paragraph><Run Text="Chapter"/></Paragraph></TableCell>'
    '</TableRow>'
    '<TableRow>'
    '<TableCell><Paragraph><Run Text="John"/></Paragraph></TableCell>'
    '</TableRow>'
    '</TableRowGroup>'
    '</Table>'
)

SAMPLE_WITH_IMAGE = (
    '<Paragraph><Run Text="Before"/></Paragraph>'
    f'<Paragraph><UriMedia Uri="{IMAGE_URL}"/></Paragraph>'
    '<Paragraph><Run Text="After"/></Paragraph>'
)

SAMPLE_MALFORMED = (
    '<Paragraph FontSize="24"><Run Text="Sermon Notes"/>'
    '<Paragraph><Run Text="First point"/></Span>'
)
