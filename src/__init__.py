"""DeckInsight pitch-deck analysis service.

Extracts the text of uploaded pitch decks, either from the PDF text layer
or through AWS Textract, asks an OpenAI model for a structured investment
analysis, and stores the normalized report for each deck.
"""
