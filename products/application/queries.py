"""
商品应用服务层的查询对象。
"""


class GetProductQuery:
    """获取商品查询"""
    
    def __init__(self, id: str):
        """
        初始化获取商品查询。
        
        Args:
            id: 商品ID
        """
        self.id = id
