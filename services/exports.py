import io

import pandas as pd

SHEET_NAME = 'Transactions'

COLUMNS = [
    ('created_at', 'Date'),
    ('product_name', 'Product'),
    ('type', 'Type'),
    ('quantity', 'Quantity'),
    ('reference_number', 'Reference'),
    ('notes', 'Notes'),
]

TYPE_LABELS = {'in': 'In', 'out': 'Out'}


def transactions_frame(rows):
    data = []
    for row in rows:
        created_at = row.get('created_at')
        data.append({
            'Date': created_at.strftime('%Y-%m-%d %H:%M') if created_at else '-',
            'Product': row.get('product_name') or '-',
            'Type': TYPE_LABELS.get(row.get('type'), row.get('type')),
            'Quantity': row.get('quantity'),
            'Reference': row.get('reference_number') or '-',
            'Notes': row.get('notes') or '-',
        })
    return pd.DataFrame(data, columns=[label for _, label in COLUMNS])


def transactions_workbook(rows):
    """Excel workbook of transaction rows, returned as a rewound BytesIO."""
    df = transactions_frame(rows)
    output = io.BytesIO()
    with pd.ExcelWriter(output, engine='xlsxwriter') as writer:
        df.to_excel(writer, sheet_name=SHEET_NAME, index=False)
        worksheet = writer.sheets[SHEET_NAME]
        workbook = writer.book

        header_format = workbook.add_format({
            'bold': True,
            'text_wrap': True,
            'valign': 'top',
            'fg_color': '#D7E4BC',
            'border': 1,
            'align': 'center'
        })
        for col_num, value in enumerate(df.columns.values):
            worksheet.write(0, col_num, value, header_format)

        for i, col in enumerate(df.columns):
            longest = df[col].astype(str).map(len).max() if len(df) else 0
            worksheet.set_column(i, i, max(longest, len(col)) + 2)
    output.seek(0)
    return output
