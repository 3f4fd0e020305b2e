"""Default prompts and tool definitions for the assistant LLM calls.

Every prompt here can be overridden from the environment (see ``Settings``).
"""

PROCESS_EMAIL_SYSTEM_PROMPT = """
You act like an personal accountant, extracts email transaction details and summary them in JSON plain format,
not markdown, not HTML, just plain JSON like below. No yapping.

{
"bank_name": "...",
"datetime": "...",
"amount": "...",
"currency": "...",
"message": "...",
"plain_data": "..."
}

If it's not a transaction, just return { "result": "failed" }.
"""

PROCESS_EMAIL_USER_PROMPT = """
No yapping. Extract the transaction details such as:

bank name:
amount: human-readable, example: 1.000, 4.320.000
datetime: dd/MM/yyyy hh:mm:ss
currency: try to stick with three letter code. If VND, must change to VNĐ
message: summary, classify the transaction detail in one paragraph (30-50 words or lesser, non-formal).
Focus on purchase order, product name or person who I sent the money to; Grab/Uber group orders;
transfers between my own bank accounts; or credit card transactions. In Vietnamese only.
DO NOT REMOVE amount, currency in message.
plain_data: collect, classify the transaction detail in around 200-400 words. Ensure you collect and store enough
information of orders (example if food order: pay method (momo, credit card, COD); food store name; number,
list of food I ordered; total discount) so we can query later. Just plain information, do not include any
advertisement or offers.

From the following content:
"""

OCR_PROMPT = """
Read this image. It is a receipt, an invoice or a banking app screenshot.
Write down, as plain text, every detail needed to record the payment: shop or receiver name, bank or wallet,
date and time, each item with quantity and price, discounts, total amount and currency, payment method.
If the image does not show a payment, answer exactly: not a transaction.
"""

SCHEDULED_PROMPT = "Tổng hợp ngắn, phân loại các giao dịch được tạo trong ngày hôm nay %DATETIME%"
DATETIME_PLACEHOLDER = "%DATETIME%"

INTENT_SYSTEM_PROMPT = """
You route messages sent to a personal accounting bot. Call exactly one tool:
- ask_question: the user asks about past spending, balances or stored transactions.
- process_image: the user asks to read or record an attached or replied-to photo of a receipt.
- record_transaction: the user describes a payment or transfer they made and wants it saved.
If none applies, answer briefly without calling a tool.
"""

INTENT_TOOLS = [
    {
        "type": "function",
        "function": {
            "name": "ask_question",
            "description": "Ask a question about stored transactions.",
            "parameters": {
                "type": "object",
                "properties": {"question": {"type": "string", "description": "The question, as the user asked it."}},
                "required": ["question"],
            },
        },
    },
    {
        "type": "function",
        "function": {
            "name": "process_image",
            "description": "Process an attached image of a receipt or banking screenshot.",
            "parameters": {"type": "object", "properties": {}},
        },
    },
    {
        "type": "function",
        "function": {
            "name": "record_transaction",
            "description": "Record a manual transaction described by the user.",
            "parameters": {
                "type": "object",
                "properties": {
                    "description": {"type": "string", "description": "The transaction as described by the user."},
                },
                "required": ["description"],
            },
        },
    },
]

TRANSACTION_HEADER = "💳 *Có giao dịch thẻ mới nè* / New transaction"
REPORT_HEADER = "🥳 Báo cáo {label} tới rồi đêi"
SEPARATOR = "------------------"
UNKNOWN_USER_NOTICE = "Bạn là người dùng không xác định, bạn không phải chủ nhân của bot"
MISSING_PHOTO_NOTICE = "Gửi kèm ảnh hoá đơn hoặc trả lời vào tin nhắn có ảnh nhé"
NO_TRANSACTION_NOTICE = "Không tìm thấy giao dịch nào"
