from .stopwords import stopwords, is_a_stopword
