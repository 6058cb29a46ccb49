PRODUCT_ANALYSIS_PROMPT = """
You are an intelligent review summarizer. Based on the reviews provided for the product "{product_name}", respond ONLY with a strict JSON object in the following format, with no markdown and no commentary:

{{
  "category": "string",
  "features": {{
    "FeatureName": {{
      "positive": [ "string" ],
      "negative": [ "string" ],
      "mentions": number
    }}
  }},
  "mostAppreciated": [ "string" ],
  "leastAppreciated": [ "string" ],
  "overallSentiment": "positive" | "neutral" | "negative"
}}

Here are the reviews:

{reviews}

REMEMBER: Respond ONLY with valid JSON. DO NOT include markdown or commentary. DO NOT explain anything.
"""
