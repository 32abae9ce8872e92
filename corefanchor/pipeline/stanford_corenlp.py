import os
from typing import Dict, List, Optional, Set, Any

import stanza
from stanza.protobuf import CoreNLP_pb2
from stanza.server import CoreNLPClient
from stanza.resources.installation import DEFAULT_CORENLP_DIR

from corefanchor.pipeline.core import Document, PipelineStep, Sentence, Token
from corefanchor.pipeline.corefs.mentions import CorefChain, CorefMention


def corenlp_is_installed() -> bool:
    return os.path.exists(DEFAULT_CORENLP_DIR)


def _corenlp_token_text(token: CoreNLP_pb2.Token) -> str:  # type: ignore
    return token.originalText if token.HasField("originalText") else token.word


def document_from_corenlp(annotations: CoreNLP_pb2.Document) -> Document:  # type: ignore
    """Convert a Stanford CoreNLP annotation into a :class:`.Document`

    .. note::

        Sentences text is rebuilt from their tokens surface form and
        the whitespace following them.

    :param annotations: stanford CoreNLP document annotations, with at
        least the ``pos`` and ``ner`` annotators.
    """
    sentences = []
    for corenlp_sentence in annotations.sentence:
        tokens = []
        text = []
        for i, corenlp_token in enumerate(corenlp_sentence.token):
            timex_value = None
            if corenlp_token.HasField("timexValue") and corenlp_token.timexValue.HasField(
                "value"
            ):
                timex_value = corenlp_token.timexValue.value
            tokens.append(
                Token(
                    _corenlp_token_text(corenlp_token),
                    corenlp_token.pos,
                    corenlp_token.ner or "O",
                    word=corenlp_token.word,
                    timex_value=timex_value,
                )
            )
            text.append(_corenlp_token_text(corenlp_token))
            if i < len(corenlp_sentence.token) - 1:
                text.append(corenlp_token.after)
        sentences.append(Sentence(tokens, text="".join(text)))
    return Document(sentences)


def corefs_from_corenlp(
    annotations: CoreNLP_pb2.Document,  # type: ignore
) -> Dict[int, CorefChain]:
    """Convert Stanford CoreNLP coreference chains

    :param annotations: stanford CoreNLP document annotations, with
        the ``coref`` (or ``dcoref``) annotator.

    :return: coreference chains, by chain id
    """
    chains = {}
    for corenlp_chain in annotations.corefChain:
        mentions = []
        for corenlp_mention in corenlp_chain.mention:
            mention_sent = annotations.sentence[corenlp_mention.sentenceIndex]

            mention_words = []
            for token in mention_sent.token[
                corenlp_mention.beginIndex : corenlp_mention.endIndex - 1
            ]:
                mention_words.append(_corenlp_token_text(token))
                mention_words.append(token.after)
            mention_words.append(
                _corenlp_token_text(mention_sent.token[corenlp_mention.endIndex - 1])
            )

            mentions.append(
                CorefMention(
                    corenlp_mention.sentenceIndex,
                    corenlp_mention.beginIndex,
                    corenlp_mention.endIndex,
                    corenlp_mention.headIndex,
                    "".join(mention_words),
                )
            )

        representative = None
        if corenlp_chain.HasField("representative") and corenlp_chain.representative < len(
            mentions
        ):
            representative = corenlp_chain.representative
        chains[corenlp_chain.chainID] = CorefChain(mentions, representative)

    return chains


class StanfordCoreNLPPipeline(PipelineStep):
    """Tokenize, tag and (optionally) resolve coreferences of a raw
    text with Stanford CoreNLP, producing the ``document`` (and
    ``corefs``) needed by the post-coreference steps.

    .. note::

        CoreNLP is downloaded with ``stanza`` on first use if it is not
        installed.

    .. warning::

        Coreference resolution can use a lot of memory.  The server
        memory can be set with ``server_kwargs`` (for example,
        ``{"memory": "8G"}``).
    """

    def __init__(
        self,
        annotate_corefs: bool = True,
        corenlp_custom_properties: Optional[Dict[str, Any]] = None,
        server_timeout: int = 9999999,
        **server_kwargs,
    ) -> None:
        """
        :param annotate_corefs: if ``False``, only produce the
            document, without running the (slow) coreference
            annotators.
        :param corenlp_custom_properties: additional properties for the
            CoreNLP server
        :param server_timeout: CoreNLP server timeout, in ms
        :param server_kwargs: CoreNLP server start options, except
            ``be_quiet`` and ``max_char_length`` which are set by this
            step.
        """
        self.annotate_corefs = annotate_corefs
        self.corenlp_custom_properties = corenlp_custom_properties or {}
        self.server_timeout = server_timeout
        self.server_kwargs = server_kwargs
        super().__init__()

    def corenlp_annotators(self) -> List[str]:
        # timex values are produced by the ner annotator
        annotators = ["tokenize", "ssplit", "pos", "lemma", "ner"]
        if self.annotate_corefs:
            annotators += ["parse", "dcoref"]
        return annotators

    def __call__(self, text: str, **kwargs) -> Dict[str, Any]:
        if not corenlp_is_installed():
            stanza.install_corenlp()

        with CoreNLPClient(
            annotators=self.corenlp_annotators(),
            properties=self.corenlp_custom_properties,
            timeout=self.server_timeout,
            max_char_length=len(text),
            be_quiet=True,
            **self.server_kwargs,
        ) as client:
            annotations: CoreNLP_pb2.Document = client.annotate(text)  # type: ignore

        out: Dict[str, Any] = {"document": document_from_corenlp(annotations)}
        if self.annotate_corefs:
            out["corefs"] = corefs_from_corenlp(annotations)
        return out

    def needs(self) -> Set[str]:
        return {"text"}

    def production(self) -> Set[str]:
        return {"document", "corefs"} if self.annotate_corefs else {"document"}
